from setuptools import setup, find_packages

setup(
    name='moodtrace',
    version='1.0.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    python_requires='>=3.11',
    install_requires=[
        'colored>=2.2.3',
        'halo>=0.0.31',
        'numpy>=1.26.2',
        'python-dotenv>=1.0.0',
        'scikit-learn>=1.3.2',
    ],
    extras_require={
        'test': ['pytest>=7.4'],
    },
    entry_points='''
        [console_scripts]
        moodtrace=moodtrace.__main__:main
    ''',
    author='Juan Sugg',
    author_email='juanpedrosugg@gmail.com',
    license='MIT',
    keywords='mood delta trajectory emotion detection',
    description='Mood delta and emotional trajectory detection engine',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
