def get_resource_from_reference(reference: str) -> tuple[str | None, str | None]:
    """
    Returns a split resource from a reference (e.g. "Patient/123" -> ("Patient", "123")).
    A bare id has no resource type (e.g. "123" -> (None, "123")).
    """
    reference = reference.strip()
    if reference == "":
        return None, None

    parts = reference.rstrip("/").split("/")
    if len(parts) < 2:
        return None, parts[0]

    return parts[-2], parts[-1]


def get_id_from_location(location: str, resource_type: str) -> str | None:
    """
    Returns the id from a Location header (e.g. "http://example.org/Patient/123/_history/1" -> "123")
    """
    marker = f"{resource_type}/"
    index = location.find(marker)
    if index < 0:
        return None

    resource_id = location[index + len(marker):].split("/")[0]
    return resource_id or None
