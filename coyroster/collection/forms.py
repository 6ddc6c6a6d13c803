"""Forms for the collection blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length


class MemberTargetForm(FlaskForm):
    """Names the member a promote, demote or remove request acts on."""

    user_id = StringField("User", validators=[DataRequired(), Length(max=128)])
