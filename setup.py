import importlib.util
import os

from setuptools import find_packages, setup

# 不导入包本体，避免在构建环境中需要运行时依赖
_META_PATH = os.path.join(os.path.dirname(__file__), "src", "obreverse", "_meta.py")
_spec = importlib.util.spec_from_file_location("_obreverse_meta", _META_PATH)
_meta = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(_meta)

with open("requirements.txt", encoding="utf-8") as fp:
    required = [line for line in fp.read().splitlines() if line and not line.startswith("#")]
with open("README.md", encoding="utf-8") as fp:
    readme = fp.read()

META_INFO = _meta.MetaInfo()
setup(
    name=META_INFO.PROJ_NAME,
    version=META_INFO.VER,
    author=META_INFO.AUTHOR,
    author_email=META_INFO.AUTHOR_EMAIL,
    description=META_INFO.PROJ_DESC,
    long_description=readme,
    long_description_content_type="text/markdown",
    url=META_INFO.PROJ_SRC,
    python_requires=">=3.10",
    packages=find_packages("src"),
    package_dir={"": "src"},
    install_requires=required,
    extras_require={"test": ["pytest>=8.0", "pytest-asyncio>=0.24"]},
    entry_points={"console_scripts": ["obreverse = obreverse.__main__:main"]},
)
