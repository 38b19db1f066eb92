from setuptools import setup, find_packages

# Version information
version = '0.1.0'

# Read long description from README
with open('README.md', 'r', encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='sentinel-otp',
    version=version,
    description='TOTP code generation and an authenticator service registry',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Sentinel Team',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    python_requires='>=3.9',
    install_requires=[
        'cryptography>=41.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pyotp>=2.8.0',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: End Users/Desktop',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Security',
        'Topic :: Security :: Cryptography',
    ],
    entry_points={
        'console_scripts': [
            'sentinel=sentinel.main:main',
        ],
    },
)
