import uvicorn
from csv_categorizer.core.config import config


def main():
    uvicorn.run(
        "csv_categorizer.main:app",
        host=config.host,
        port=config.port,
        reload=config.reload,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    main()
