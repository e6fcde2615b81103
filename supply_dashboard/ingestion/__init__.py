"""
supply_dashboard.ingestion — load products and sales from flat files.

Modules:
  csv_import — products.csv / sales.csv parsers with all-or-nothing validation.
"""
