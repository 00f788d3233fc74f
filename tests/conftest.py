import os
import tempfile

# Keep test logs out of the working tree; must run before lrckit is imported.
os.environ.setdefault("LRCKIT_LOG_DIR", tempfile.mkdtemp(prefix="lrckit-logs-"))
