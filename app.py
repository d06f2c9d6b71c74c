"""Development entrypoint: ``python app.py`` serves the dashboard and link pages with Socket.IO."""

from src.attendance_link.attendance_link.main import run

if __name__ == "__main__":
    run()
