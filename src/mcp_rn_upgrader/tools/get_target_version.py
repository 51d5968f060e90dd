"""Target version confirmation tool."""

__all__ = ["get_target_version"]


def get_target_version(target_version: str) -> dict:
    """Echo the React Native version the user wants to upgrade to."""
    version = target_version.strip()
    if not version:
        return {"error": "target_version must not be empty"}
    return {
        "target_version": version,
        "message": f"Target version confirmed: {version}",
    }
