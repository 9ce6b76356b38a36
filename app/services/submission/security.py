from typing import Any, Dict

SECURITY_CODE_PREFIX = "rc_"


def security_code(ccn: str) -> str:
    return f"{SECURITY_CODE_PREFIX}{ccn}"


def build_security_tag(ccn: str, ccn_system: str) -> Dict[str, str]:
    return {"system": ccn_system, "code": security_code(ccn)}


def build_meta(ccn: str, ccn_system: str) -> Dict[str, Any]:
    """
    Returns the meta element for every record written to the registry. It carries exactly
    one security tag, scoping visibility to the submitting organization.
    """
    return {"security": [build_security_tag(ccn, ccn_system)]}
