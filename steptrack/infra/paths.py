from steptrack.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = DATA_DIR.resolve()
INDIVIDUALS_FILE = DATA_DIR / 'individuals.csv'
GROUPS_FILE = DATA_DIR / 'groups.csv'

__all__ = ['DATA_DIR', 'INDIVIDUALS_FILE', 'GROUPS_FILE']
