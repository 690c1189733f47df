"""Run the API server: python -m envelope_budget"""

import uvicorn

from envelope_budget.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "envelope_budget.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
