"""swiftdeploy - push Swift sources to GitHub and trigger a cloud build."""

__version__ = "0.1.0"
