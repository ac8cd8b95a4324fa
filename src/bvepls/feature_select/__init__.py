from bvepls.feature_select.vip import vip_scores

__all__ = ["vip_scores"]
