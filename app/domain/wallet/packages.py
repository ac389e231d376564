"""Minute packages on sale. Static until packages get their own admin screen."""

MINUTE_PACKAGES = [
    {"id": "pkg_30", "minutes": 30, "price": 50, "name": "Starter"},
    {"id": "pkg_60", "minutes": 60, "price": 90, "name": "Basic"},
    {"id": "pkg_120", "minutes": 120, "price": 160, "name": "Value"},
    {"id": "pkg_300", "minutes": 300, "price": 350, "name": "Premium"},
]


def get_package(package_id: str):
    return next((p for p in MINUTE_PACKAGES if p["id"] == package_id), None)
