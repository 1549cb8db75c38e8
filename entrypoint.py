"""Service entrypoint; starts uvicorn with host and port from env."""
import os
import uvicorn

from user_service.main import app


def main() -> None:
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8002"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
