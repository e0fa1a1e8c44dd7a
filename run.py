import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    # The catalog is read-only after startup, so extra workers only cost memory
    workers = int(os.environ.get("WEB_CONCURRENCY", 1))
    uvicorn.run(
        "build_planner.main:app",
        host="0.0.0.0",
        port=port,
        workers=workers,
    )
