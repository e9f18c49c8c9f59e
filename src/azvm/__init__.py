"""azvm - Azure single-VM quick provisioning CLI

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Security by design (generated credentials, redacted command echo)
- Fail fast with helpful guidance

The azvm CLI wraps the Azure CLI to create one Windows or Linux VM with
sensible defaults and prints the details needed to connect to it.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
