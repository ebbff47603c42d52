"""Backend services, configuration, and HTTP surface for WageTax."""
