# ecovive/services/__init__.py
# Business logic: catalog, status machine, scoring, proximity, lifecycle.
