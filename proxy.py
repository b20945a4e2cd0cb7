#!/usr/bin/env python3
"""Run the chat proxy with uvicorn.

Settings come from configs/config_default.yaml (or CHATBRIDGE_CONFIG), a .env
file in the working directory, and CHATBRIDGE_* / GEMINI_API_KEY /
OPENAI_API_KEY environment variables.
"""

import uvicorn

from chatbridge import create_app, load_settings


def main() -> None:
    settings = load_settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
