# app_creator/__main__.py
import uvicorn

from app_creator.utils.config import HOST, PORT


def main() -> None:
    uvicorn.run("app_creator.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
