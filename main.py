import os

import uvicorn


def main() -> None:
    reload_enabled = os.getenv("METGEN_ENV", "development").lower() != "production"
    uvicorn.run(
        "metgen.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=reload_enabled,
    )


if __name__ == "__main__":
    main()
