"""Constants for nstrack."""

# Project marker directory
NSTRACK_DIR = ".nstrack"

# Files inside NSTRACK_DIR
CONFIG_FILE = "config.yaml"
STATE_FILE = "state.json"
LOCK_FILE = "state.lock"

# Project ignore file
IGNORE_FILE = ".nstrackignore"

# Environment variables consulted for classpath directories, in order
CLASSPATH_ENV_VARS = ("NSTRACK_CLASSPATH", "CLASSPATH")

# Prefix for diagnostic messages
LOG_PREFIX = "nstrack:"
