"""Run the API with uvicorn: python -m precisely"""

import uvicorn

from precisely.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "precisely.main:app", host=settings.host, port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
