# -*- coding: utf-8 -*-

import setuptools

setuptools.setup(
        name='MythAPI',
        version='0.1.0',
        description='Version aware MythTV backend protocol and database client',
        long_description="Decodes MythTV protocol responses and database "
                         "rows into records, following the field layout "
                         "of each protocol and schema version.",
        packages=['MythAPI', 'MythAPI.utility'],
        python_requires='>=3.9',
        install_requires=['mysqlclient', 'lxml'],
        extras_require={'test': ['pytest']},
        )
