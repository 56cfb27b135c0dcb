"""Write the OpenAPI schema of the service to docs/openapi.json."""

from pathlib import Path

import orjson
from fastapi.openapi.utils import get_openapi

from sufra.main import app

OUTPUT = Path("docs/openapi.json")


def main() -> None:
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    OUTPUT.parent.mkdir(parents=True, exist_ok=True)
    OUTPUT.write_bytes(orjson.dumps(schema, option=orjson.OPT_INDENT_2))


if __name__ == "__main__":
    main()
