import uvicorn

from bookkeeper.config import settings


def main() -> None:
    uvicorn.run("bookkeeper.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
