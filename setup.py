from setuptools import find_packages, setup

package_name = 'kinematic_mpc'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/' + package_name + '/config', [
            'config/mpc.yaml',
        ]),
    ],
    python_requires='>=3.8',
    install_requires=['setuptools', 'numpy', 'casadi', 'PyYAML'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    description='Receding-horizon kinematic bicycle MPC solved with CasADi/IPOPT',
    entry_points={
        'console_scripts': [
            'mpc_simulate = kinematic_mpc.simulate:main',
        ],
    },
)
