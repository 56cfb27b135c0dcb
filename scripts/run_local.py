"""Run the service locally with auto reload."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "sufra.main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "8000")),
        reload=True,
    )


if __name__ == "__main__":
    main()
