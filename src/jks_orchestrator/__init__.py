"""Remote Java keystore management over SSH and WinRM."""

__version__ = "1.0.0"
