"""``python -m gohome_launcher`` behaves like the ``gohome`` script."""

from gohome_launcher.main import launch

if __name__ == "__main__":
    launch()
