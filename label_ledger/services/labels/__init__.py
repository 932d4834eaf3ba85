"""Label code issuance: formatting, counters, batch history and allocation."""
