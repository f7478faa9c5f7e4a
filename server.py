import logging
import os

import uvicorn

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def main() -> None:
    env = os.environ.get("ENV", "dev")
    port = int(os.environ.get("PORT", 8000))
    default_level = "DEBUG" if env == "dev" else "INFO"
    level = os.environ.get("LOG_LEVEL", default_level).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("server").info("codewars.start env=%s port=%d log_level=%s", env, port, level)

    if env == "dev":
        uvicorn.run("codewars.main:app", host="127.0.0.1", port=port, reload=True, log_level=level.lower())
    else:
        # contest deployments sit behind a proxy on all interfaces
        uvicorn.run("codewars.main:app", host="0.0.0.0", port=port, log_level=level.lower(), proxy_headers=True)


if __name__ == "__main__":
    main()
