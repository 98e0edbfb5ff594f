# messages.py – fixed user-visible strings

ADMIN = "Run VS Code with admin privileges so the changes can be applied."
ENABLED = "Custom CSS enabled. Restart to take effect."
DISABLED = "Custom CSS disabled and reverted to default. Restart to take effect."
NOT_INSTALLED = "Custom CSS is not installed."
SOMETHING_WRONG = "Something went wrong: "
RESTART_IDE = "Restart Visual Studio Code"

NO_FILE_SELECTED = "No file selected."
NO_WORKSPACE_FOLDER = "The selected file is not part of a workspace folder."
NO_SANDBOX_RUNNING = "The sandbox server is not running."
PAGE_NOT_FOUND = "The page could not be found on the sandbox server."
OPENED = "Opened in the default browser."

DEFAULT_URL_PREFIX = "http://localhost:3000/"
