import os
import platform

from configobj import ConfigObj, ConfigObjError, Section
from configobj.validate import Validator

# The default extension for configuration files
config_extension = '.cfg'

# the packaged defaults, platform flavors and schema live beside this module
package_directory = os.path.dirname(os.path.abspath(__file__))

default_config_name = 'obdserial'


def config_flavor(name, flavor=None):
    configname = name if not flavor else name + '.' + flavor
    return configname


def config_filename(name, directory=None):
    """
    Determines the location of a config file in a directory, by default the package directory.
    """
    return os.path.join(directory or package_directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def config_flavor_file(name, directory=None, flavor=None) -> ConfigObj:
    """
    Loads a flavor of a config file, named after the base, followed by a period and the flavor.
    A missing file gives an empty configuration.
    """
    file = config_filename(config_flavor(name, flavor), directory)
    return load_config_file_base(file, False)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def user_config_file(name):
    return os.path.expanduser('~/' + name + config_extension)


def load_config(name=default_config_name, directory=None):
    """
    Loads all the configuration files that relate to the given name.
    Configurations are merged in this order, later values overriding earlier ones:
    - the packaged default flavor
    - the packaged platform flavor
    - the user override, in the home directory
    - the local configuration in `directory`
    The merged configuration is then validated against the packaged schema flavor, which also
    converts values to their declared types and fills in defaults.
    :param directory: the location of the local configuration file. No local file is read when None.
    :return: the validated ConfigObj
    :raises ConfigObjError: when the merged configuration fails validation
    """
    config = ConfigObj(configspec=config_filename(config_flavor(name, 'schema')))
    config.merge(config_flavor_file(name, flavor='default'))
    config.merge(config_flavor_file(name, flavor=os_name()))
    config.merge(load_config_file_base(user_config_file(name), must_exist=False))
    if directory is not None:
        config.merge(config_flavor_file(name, directory))

    result = config.validate(Validator())
    if result is not True:
        raise ConfigObjError("the config file %s failed validation %s" % (name, result))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:   An iterable that lists the names of the sections to resolve
    :return: The configuration object identified by the path, or None
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return
    return conf


def connector_config(conf: Section, section='connector'):
    """
    Extracts the connector settings from a loaded configuration.
    :param section: the dotted path of the connector section
    :return: a dict with `serial_path` and `serial_opts`, as accepted by `get_connector`
    """
    conf = fetch_conf_path(conf, section.split('.'))
    if conf is None:
        raise ConfigObjError("no section '%s' in the configuration" % section)
    return {
        'serial_path': conf.get('serial_path'),
        'serial_opts': dict(conf.get('serial_opts', {}))
    }


def load_connector_config(directory=None, name=default_config_name, section='connector'):
    """
    Loads the connector settings from the layered configuration files.
    """
    return connector_config(load_config(name, directory), section)
