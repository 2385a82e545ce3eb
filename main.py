import uvicorn

from issue_tracker.config.env import PORT
from issue_tracker.main import app


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
