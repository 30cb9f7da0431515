from .splendor_aec_env import SplendorEnv, env, raw_env

__all__ = ['SplendorEnv', 'env', 'raw_env']
