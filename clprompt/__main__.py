"""Run the workspace server: ``python -m clprompt``."""

import uvicorn

from clprompt.infra.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "clprompt.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
