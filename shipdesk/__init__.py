"""ShipDesk admin API."""
