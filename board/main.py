import uvicorn

from board.core.app_factory import create_app
from board.core.config import settings

app = create_app()


def run() -> None:
    """Serve the board with uvicorn on the configured host and port."""
    uvicorn.run(
        "board.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
