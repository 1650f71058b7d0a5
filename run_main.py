# run_main.py
import logging

import uvicorn

from vocab_backend.app.core.config import config
from vocab_backend.app.main import get_app

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = get_app()

if __name__ == "__main__":
    uvicorn.run("run_main:app", host="0.0.0.0", port=5000)
