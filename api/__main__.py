import logging
import os

import uvicorn


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    port = int(os.environ.get("PORT", "4000"))
    host = os.environ.get("HOST", "0.0.0.0")
    logging.getLogger(__name__).info("Server running on port %d", port)
    uvicorn.run("api.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
