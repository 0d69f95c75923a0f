import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def requirements():
    with open(os.path.join(own_dir, 'requirements.txt')) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            yield line


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='gardener-release-notes',
    version=version(),
    description='Publish changelogs of merged pull-requests as GitHub-release-bodies',
    python_requires='>=3.10',
    packages=setuptools.find_packages(include=['release_notes', 'release_notes.*']),
    install_requires=list(requirements()),
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'publish-release-notes = release_notes.cli:main',
        ],
    },
)
