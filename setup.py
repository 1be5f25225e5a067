from setuptools import setup, find_packages
import re

# Read version from hrtax/__init__.py
with open('hrtax/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='hrtax',
    version=version,
    packages=find_packages(include=['hrtax', 'hrtax.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'hrtax=hrtax.cli.__main__:main',
            'hrtax-mcp=hrtax.mcp.server:run_server',
        ],
    },
    author='Payroll',
    description='Monthly withholding tax engine for payroll runs.',
    python_requires='>=3.10',
)
