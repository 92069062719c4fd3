"""
Build DirAtlas into a single executable
"""
import os
import shutil
import subprocess
import sys

APP_NAME = 'DirAtlas'


def build():
    print("Cleaning old builds...")
    for folder in ['build', 'dist']:
        if os.path.exists(folder):
            shutil.rmtree(folder)

    print("Building executable...")

    cmd = [
        'pyinstaller',
        '--onefile',
        '--name', APP_NAME,
        '--add-data', f'diratlas{os.pathsep}diratlas',
        '--hidden-import', 'PySide6',
        '--hidden-import', 'psutil',
        '--hidden-import', 'cryptography',
        '--hidden-import', 'cryptography.hazmat.primitives.hashes',
        'main.py'
    ]

    result = subprocess.run(cmd, capture_output=True, text=True)

    if result.returncode == 0:
        exe_name = APP_NAME + ('.exe' if sys.platform.startswith('win') else '')
        exe_src = os.path.join('dist', exe_name)
        print("Build finished!")
        print(f"Executable: {exe_src}")

        release_dir = 'release'
        os.makedirs(release_dir, exist_ok=True)
        shutil.copy(exe_src, os.path.join(release_dir, exe_name))

        if os.path.exists('README.md'):
            shutil.copy('README.md', os.path.join(release_dir, 'README.md'))

        print(f"Release written to: {release_dir}/")
    else:
        print("Build failed:")
        print(result.stderr)
        sys.exit(1)


if __name__ == '__main__':
    build()
