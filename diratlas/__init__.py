"""DirAtlas: directory manifests, directory trees and root listings."""

__version__ = "0.1.0"
