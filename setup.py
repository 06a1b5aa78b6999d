from setuptools import find_packages, setup


version = '0.1.0'


setup(
    name='restr',
    version=version,
    description='REST verbs over in-memory resource collections',
    long_description=open('README').read() + '\n\n' + open('CHANGES').read(),
    license='BSD',
    packages=find_packages(exclude=['ez_setup', 'examples', 'tests']),
    install_requires=[
        'WebOb >= 1.8',
        'structlog >= 21.1',
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.8',
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP :: WSGI',
        'Topic :: Software Development :: Libraries',
    ],
    keywords='restr rest resources collections webob')
