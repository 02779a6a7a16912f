from typing import Dict, Any, Optional

SENSITIVE_KEYS = {
    'license_number', 'driving_license_number', 'customer_license', 'ni_number',
    'national_insurance_number', 'email', 'customer_email', 'phone', 'customer_phone',
    'address', 'customer_address', 'registration'
}


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    def sanitize_value(key: str, value: Any) -> Any:
        if key.lower() in SENSITIVE_KEYS:
            if isinstance(value, str) and value.strip():
                return value[:3] + "***" if len(value) > 3 else "***"
            return "***"
        if isinstance(value, dict):
            return sanitize_log_data(value)
        if isinstance(value, list):
            return [sanitize_value(key, item) for item in value]
        if isinstance(value, str) and value.startswith('data:'):
            return value[:30] + "..."
        return value
    return {key: sanitize_value(key, value) for key, value in data.items()}
