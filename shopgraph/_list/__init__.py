from .graphql import PageInfoType, PageInput
from .page import Page
