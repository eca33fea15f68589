"""Run the API with uvicorn: python -m blogsmith."""

import uvicorn

from blogsmith.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "blogsmith.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
