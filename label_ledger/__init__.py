"""Sequential barcode issuance with an auditable batch ledger."""

__version__ = "0.1.0"
