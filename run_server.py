import logging
import os

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("REPLAY_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Starting timeline API, docs at http://localhost:8000/docs")

    uvicorn.run(
        "replay_backend.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
