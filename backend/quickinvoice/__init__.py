"""QuickInvoice backend: order numbering, invoice rendering and sharing."""
