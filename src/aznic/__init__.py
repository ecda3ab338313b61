"""aznic - Azure network interface sample

Philosophy:
- Ruthless simplicity
- Delegate retry, polling and auth to the Azure SDK
- No package-level client state (everything flows through SampleContext)
- Fail fast with helpful guidance

aznic provisions a small network topology (virtual network, three subnets,
public IPs, three NICs, a storage account and a VM), shows how NICs are
attached, updated and deleted, then tears everything down again.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
