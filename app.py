import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
if str(REPO_ROOT / "src" / "attendance_reconciler") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src" / "attendance_reconciler"))

from attendance_reconciler.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"], use_reloader=False)
