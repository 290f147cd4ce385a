from typing import Any, Dict

# Базовые заголовки для JSON API.
# "Accept-Encoding" не указываем: httpx/requests добавят его сами.
BASE_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def get_headers(settings: Any) -> Dict[str, str]:
    """Заголовки по умолчанию с User-Agent вида <app>/<version>"""
    headers = BASE_HEADERS.copy()
    headers["User-Agent"] = f"{settings.APP_NAME}/{settings.APP_VERSION}"
    return headers
