from .part import PartRecord, AlternativePartRecord, SearchResult, EnquiryDraft

__all__ = ['PartRecord', 'AlternativePartRecord', 'SearchResult', 'EnquiryDraft']
