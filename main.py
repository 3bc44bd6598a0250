from __future__ import annotations

import time

from dotenv import load_dotenv

print("Initializing environment configuration...")
_env_start_time = time.time()
load_dotenv()
print(f"[✓] Environment variables loaded in {time.time() - _env_start_time:.2f}s")

from apps.api import create_app  # noqa: E402
from core.config import get_settings  # noqa: E402

_api_start_time = time.time()
app = create_app()
print(f"[✓] FastAPI app initialized in {time.time() - _api_start_time:.2f}s")

_settings = get_settings()
print(f"✅ SUPABASE_URL: {_settings.supabase_url}")
print(f"✅ SUPABASE_KEY exists: {bool(_settings.supabase_key)}")
print(f"✅ Cost estimator: {_settings.estimator_url or 'static'}")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8001, reload=True)
