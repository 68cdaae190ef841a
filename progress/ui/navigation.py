NAV_ITEMS = (
    {'label': 'Dashboard', 'path': '/dashboard', 'icon': 'home'},
    {'label': 'Customers', 'path': '/customers', 'icon': 'users'},
    {'label': 'Add', 'path': '/create-loan', 'icon': 'plus'},
    {'label': 'Analytics', 'path': '/analytics', 'icon': 'chart'},
    {'label': 'Profile', 'path': '/profile', 'icon': 'user'},
)


def is_active(item_path, current_path):
    return current_path == item_path or current_path.startswith(item_path.rstrip('/') + '/')


def build_nav(current_path):
    """Navigation bar entries with the one matching ``current_path`` marked active."""
    return [dict(item, active=is_active(item['path'], current_path or '/')) for item in NAV_ITEMS]
