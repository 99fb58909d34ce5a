import os

# Editor tests create real widgets; keep them off-screen on headless runners.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
