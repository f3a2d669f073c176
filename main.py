import sys

from engine.engine import CoreEngine
from heartree.config import load_config
from heartree.scene import HeartTreeScene


def main():
    engine = CoreEngine(width=1280, height=720, title="Heart Tree")

    config = load_config(sys.argv[1] if len(sys.argv) > 1 else "scene.json")
    scene = HeartTreeScene(config)
    engine.add_component(scene)

    engine.run()


if __name__ == "__main__":
    main()
