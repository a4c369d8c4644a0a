import re

# Minimum length required for a valid password
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

# Validates a username with alphanumeric characters, underscore, dash, and dot
# Example: "john.doe_2023"
USERNAME_VALIDATOR = re.compile(r"^[a-zA-Z0-9_\-.]{3,60}$")

# Maximum length of a task name
TASK_NAME_MAX_LENGTH = 128
